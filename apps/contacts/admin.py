from django.contrib import admin

from .models import Contact


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):

    list_display = ['id', 'full_name_display', 'email', 'phone', 'company', 'owner', 'created_at']
    list_filter = ['created_at', 'tags']
    search_fields = ['first_name', 'last_name', 'email', 'phone', 'company', 'owner__email']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'created_at'

    fieldsets = [
        ('Contact', {
            'fields': ['owner', 'first_name', 'last_name', 'email', 'phone']
        }),
        ('Work', {
            'fields': ['company', 'job_title']
        }),
        ('Details', {
            'fields': ['notes', 'tags', 'custom_fields']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('owner').prefetch_related('tags')

    def full_name_display(self, obj):
        return obj.full_name or '-'

    full_name_display.short_description = 'Name'
