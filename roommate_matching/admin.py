from django.contrib import admin
from django.utils.html import format_html

from .models import Match, MatchingActivity, Swipe
from .services import MatchingService


@admin.register(Swipe)
class SwipeAdmin(admin.ModelAdmin):
    list_display = ('swiper', 'swiped', 'action_badge', 'created_at', 'updated_at')
    list_filter = ('action', 'created_at')
    search_fields = (
        'swiper__email', 'swiper__first_name', 'swiper__last_name',
        'swiped__email', 'swiped__first_name', 'swiped__last_name'
    )
    readonly_fields = ('created_at', 'updated_at')
    date_hierarchy = 'created_at'

    def action_badge(self, obj):
        css_class = 'success' if obj.is_like else 'secondary'
        return format_html('<span class="badge badge-{}">{}</span>', css_class, obj.get_action_display())
    action_badge.short_description = 'Action'

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('swiper', 'swiped')


@admin.register(Match)
class MatchAdmin(admin.ModelAdmin):
    list_display = ('user_pair', 'score_display', 'compatibility_level', 'is_active', 'created_at')
    list_filter = ('is_active', 'created_at')
    search_fields = ('user1__email', 'user1__first_name', 'user2__email', 'user2__first_name')
    readonly_fields = ('user1', 'user2', 'created_at', 'score_calculated_at', 'compatibility_level', 'flags', 'score_breakdown')
    date_hierarchy = 'created_at'
    actions = ['recalculate_compatibility', 'deactivate_matches']

    fieldsets = (
        (None, {
            'fields': (('user1', 'user2'), 'is_active', 'created_at')
        }),
        ('Score', {
            'fields': ('compatibility_score', 'compatibility_level', 'score_calculated_at', 'flags')
        }),
        ('Stored breakdown', {
            'fields': ('score_breakdown',),
            'classes': ('collapse',)
        }),
    )

    def user_pair(self, obj):
        return f"{obj.user1.display_name} & {obj.user2.display_name}"
    user_pair.short_description = 'Roommates'

    def score_display(self, obj):
        if obj.compatibility_score is None:
            return format_html('<em>{}</em>', 'not scored')
        return f"{obj.compatibility_score:.1f}%"
    score_display.short_description = 'Score'
    score_display.admin_order_field = 'compatibility_score'

    def flags(self, obj):
        breakdown = obj.score_breakdown or {}
        green = breakdown.get('green_flags', [])
        red = breakdown.get('red_flags', [])
        if not green and not red:
            return '-'
        return format_html(
            '<span style="color: green;">{}</span><br><span style="color: red;">{}</span>',
            ', '.join(green), ', '.join(red)
        )

    def recalculate_compatibility(self, request, queryset):
        refreshed = MatchingService().refresh_match_scores(queryset)
        self.message_user(request, f"Recalculated compatibility for {refreshed} match(es).")
    recalculate_compatibility.short_description = "Recalculate compatibility scores"

    def deactivate_matches(self, request, queryset):
        service = MatchingService()
        updated = sum(
            service.deactivate_match(match)
            for match in queryset.select_related('user1__profile', 'user2__profile')
        )
        self.message_user(request, f"{updated} match(es) deactivated.")
    deactivate_matches.short_description = "Deactivate selected matches"

    def has_add_permission(self, request):
        # Matches only come from mutual likes
        return False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user1__profile', 'user2__profile')


@admin.register(MatchingActivity)
class MatchingActivityAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'activity_type', 'outcome', 'match_id', 'score', 'scores_calculated', 'execution_time_ms')
    list_filter = ('activity_type', 'success')
    search_fields = ('user__email', 'error_message')
    readonly_fields = [field.name for field in MatchingActivity._meta.fields]
    date_hierarchy = 'created_at'

    def outcome(self, obj):
        if obj.success:
            return format_html('<span style="color: green;">{}</span>', 'OK')
        return format_html('<span style="color: red;" title="{}">{}</span>', obj.error_message, 'Failed')
    outcome.short_description = 'Outcome'

    def match_id(self, obj):
        return obj.details.get('match_id', '-')
    match_id.short_description = 'Match'

    def score(self, obj):
        score = obj.details.get('overall_score')
        return f"{score:.1f}%" if score is not None else '-'

    def has_add_permission(self, request):
        return False

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user')
