from django.urls import path
from .views import auth_state

urlpatterns = [
    path("auth/state/", auth_state, name="auth_state"),
]
