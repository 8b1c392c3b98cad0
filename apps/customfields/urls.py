from django.urls import path
from . import views

app_name = 'customfields'

urlpatterns = [
    path('', views.custom_field_list_view, name='custom_field_list'),
    path('create/', views.custom_field_create_view, name='custom_field_create'),
    path('<int:pk>/', views.custom_field_detail_view, name='custom_field_detail'),
    path('<int:pk>/update/', views.custom_field_update_view, name='custom_field_update'),
    path('<int:pk>/delete/', views.custom_field_delete_view, name='custom_field_delete'),
]
