from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [

    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('me/', views.me_view, name='me'),
    path('signup/', views.signup_view, name='signup'),
    path('counselors/', views.counselor_list_view, name='counselor_list'),
    path('counselors/options/', views.counselor_options_view, name='counselor_options'),
    path('counselors/create/', views.counselor_create_view, name='counselor_create'),
    path('users/<int:pk>/role/', views.user_role_view, name='user_role'),
]
