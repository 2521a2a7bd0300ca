from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # Matching system (swipes, matches, discover, stats)
    path('api/', include('roommate_matching.urls')),

    # Notifications
    path('api/notifications/', include('notifications.urls')),
]
