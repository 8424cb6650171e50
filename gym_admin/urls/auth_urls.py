from django.urls import path

from ..views import auth_views

app_name = "auth"

urlpatterns = [
    path("register/initiate/", auth_views.RegisterInitiateView.as_view(), name="register-initiate"),
    path("register/verify/",   auth_views.RegisterVerifyView.as_view(),   name="register-verify"),
    path("login/",             auth_views.LoginView.as_view(),            name="login"),
    path("logout/",            auth_views.LogoutView.as_view(),           name="logout"),
    path("me/",                auth_views.MeView.as_view(),               name="me"),
]
