from django.urls import path
from . import views

app_name = 'contacts'

urlpatterns = [
    path('', views.contact_list_view, name='contact_list'),
    path('search/', views.contact_search_view, name='contact_search'),
    path('stats/', views.contact_stats_view, name='contact_stats'),
    path('export/', views.contact_export_view, name='contact_export'),
    path('create/', views.contact_create_view, name='contact_create'),
    path('<int:pk>/', views.contact_detail_view, name='contact_detail'),
    path('<int:pk>/update/', views.contact_update_view, name='contact_update'),
    path('<int:pk>/delete/', views.contact_delete_view, name='contact_delete'),
]
