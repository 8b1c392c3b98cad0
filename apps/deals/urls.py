from django.urls import path
from . import views

app_name = 'deals'

urlpatterns = [
    path('', views.deal_list_view, name='deal_list'),
    path('pipeline/', views.deal_pipeline_view, name='deal_pipeline'),
    path('stats/', views.deal_stats_view, name='deal_stats'),
    path('export/', views.deal_export_view, name='deal_export'),
    path('create/', views.deal_create_view, name='deal_create'),
    path('<int:pk>/', views.deal_detail_view, name='deal_detail'),
    path('<int:pk>/update/', views.deal_update_view, name='deal_update'),
    path('<int:pk>/stage/', views.deal_update_stage_view, name='deal_update_stage'),
    path('<int:pk>/delete/', views.deal_delete_view, name='deal_delete'),
]
