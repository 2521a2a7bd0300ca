from django.urls import path
from . import views

app_name = 'matching'

urlpatterns = [
    # Swiping
    path('swipe/candidates/', views.swipe_candidates, name='swipe_candidates'),
    path('swipe/', views.swipe, name='swipe'),

    # Discover and matches
    path('discover/users/', views.discover_users, name='discover_users'),
    path('matches/', views.my_matches, name='my_matches'),

    # Compatibility
    path('compatibility/<int:user_id>/', views.compatibility_detail, name='compatibility_detail'),

    # Stats
    path('user/stats/', views.user_stats, name='user_stats'),
    path('admin/stats/', views.admin_stats, name='admin_stats'),
]
