from django.urls import path
from . import views

urlpatterns = [
    path("profile/create/", views.profile_create, name="startup_create"),
    path("profile/created/", views.profile_created, name="startup_created"),
    path("api/startups/", views.submit_api, name="startup_submit_api"),
]
