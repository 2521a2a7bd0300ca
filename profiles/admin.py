from django.contrib import admin
from .models import UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = (
        'user', 'display_name', 'age', 'location', 'budget_display',
        'deal_breakers_display', 'completion_display', 'is_active', 'created_at'
    )
    list_filter = ('is_active', 'smoking', 'pets', 'cleanliness', 'social_level')
    search_fields = ('user__email', 'user__first_name', 'user__last_name', 'display_name', 'location', 'bio')
    readonly_fields = ('created_at', 'updated_at', 'completion_display')

    fieldsets = (
        ('User', {
            'fields': ('user', 'display_name', 'is_active')
        }),
        ('Basic Information', {
            'fields': ('age', 'location', 'occupation', 'bio', 'profile_image_url')
        }),
        ('Lifestyle', {
            'fields': ('cleanliness', 'social_level', 'sleep_schedule', 'smoking', 'pets')
        }),
        ('Roommate Preferences', {
            'fields': ('deal_breakers', 'budget_min', 'budget_max', 'tags')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at', 'completion_display'),
            'classes': ('collapse',)
        }),
    )

    def budget_display(self, obj):
        if obj.budget_min is not None and obj.budget_max is not None:
            return f"${obj.budget_min} - ${obj.budget_max}"
        elif obj.budget_min is not None:
            return f"${obj.budget_min}+"
        elif obj.budget_max is not None:
            return f"Up to ${obj.budget_max}"
        return "Not specified"
    budget_display.short_description = "Budget Range"

    def deal_breakers_display(self, obj):
        return ', '.join(obj.deal_breakers) if obj.deal_breakers else '-'
    deal_breakers_display.short_description = "Deal Breakers"

    def completion_display(self, obj):
        return f"{obj.completion_percentage}%"
    completion_display.short_description = "Profile Complete"

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user')
