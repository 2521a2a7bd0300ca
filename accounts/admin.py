from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    model = CustomUser
    list_display = ('email', 'get_full_name', 'roommate_name', 'profile_completed', 'is_active', 'is_staff', 'date_joined')
    list_filter = ('profile_completed', 'is_active', 'is_staff')
    search_fields = ('email', 'first_name', 'last_name', 'profile__display_name')
    ordering = ('-date_joined',)
    readonly_fields = ('date_joined', 'last_login', 'profile_completed')
    list_select_related = ('profile',)

    fieldsets = (
        ('Login', {'fields': ('email', 'password')}),
        ('Name', {'fields': ('first_name', 'last_name')}),
        ('Matching', {
            'fields': ('profile_completed',),
            'description': 'Set automatically when the roommate profile is saved.',
        }),
        ('Access', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Activity', {'fields': ('date_joined', 'last_login')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'password1', 'password2'),
        }),
    )
    filter_horizontal = ('groups', 'user_permissions')

    def roommate_name(self, obj):
        return obj.display_name
    roommate_name.short_description = 'Shown as'
