from django.contrib import admin

from .models import CustomFieldDefinition


@admin.register(CustomFieldDefinition)
class CustomFieldDefinitionAdmin(admin.ModelAdmin):

    list_display = ['label', 'field_key', 'entity_type', 'field_type', 'owner', 'created_at']
    list_filter = ['entity_type', 'field_type', 'created_at']
    search_fields = ['label', 'field_key', 'owner__email']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['owner', 'entity_type', 'created_at']

    fieldsets = [
        ('Field', {
            'fields': ['owner', 'entity_type', 'field_key', 'label', 'field_type']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('owner')
