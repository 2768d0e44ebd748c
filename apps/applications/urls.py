from django.urls import path
from . import views

app_name = 'applications'

urlpatterns = [
    path('', views.application_list_view, name='application_list'),
    path('create/', views.application_create_view, name='application_create'),
    path('import/', views.application_import_view, name='application_import'),
    path('<uuid:pk>/', views.application_detail_view, name='application_detail'),
    path('<uuid:pk>/update/', views.application_update_view, name='application_update'),
    path('<uuid:pk>/status/', views.application_change_status_view, name='application_change_status'),
    path('<uuid:pk>/notes/', views.application_add_note_view, name='application_add_note'),
]
