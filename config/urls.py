from django.contrib import admin
from django.urls import path, include

# Main URL Configuration
# Every CRM endpoint returns JSON; the front end is served separately

urlpatterns = [

    path('admin/', admin.site.urls),
    path('contacts/', include('apps.contacts.urls')),
    path('deals/', include('apps.deals.urls')),
    path('custom-fields/', include('apps.customfields.urls')),
    path('columns/', include('apps.columns.urls')),

]
