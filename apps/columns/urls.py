from django.urls import path
from . import views

app_name = 'columns'

urlpatterns = [
    path('<slug:list_key>/', views.column_config_view, name='column_config'),
    path('<slug:list_key>/<slug:action>/', views.column_action_view, name='column_action'),
]
