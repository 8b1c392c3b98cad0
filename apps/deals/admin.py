from django.contrib import admin

from .models import Deal, DealContact


class DealContactInline(admin.TabularInline):

    model = DealContact
    extra = 0
    readonly_fields = ['created_at']
    fields = ['contact', 'created_at']
    raw_id_fields = ['contact']


@admin.register(Deal)
class DealAdmin(admin.ModelAdmin):

    list_display = ['id', 'name', 'stage', 'value_display', 'expected_close_date', 'owner', 'created_at']
    list_filter = ['stage', 'currency', 'created_at']
    search_fields = ['name', 'notes', 'owner__email']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-created_at']
    list_per_page = 50
    date_hierarchy = 'created_at'
    inlines = [DealContactInline]

    fieldsets = [
        ('Deal', {
            'fields': ['owner', 'name', 'stage']
        }),
        ('Value', {
            'fields': ['value', 'currency', 'expected_close_date']
        }),
        ('Details', {
            'fields': ['notes', 'custom_fields']
        }),
        ('Timestamps', {
            'fields': ['created_at', 'updated_at'],
            'classes': ['collapse']
        }),
    ]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('owner')

    def value_display(self, obj):
        if not obj.value:
            return '-'
        return f"{obj.value} {obj.currency}"

    value_display.short_description = 'Value'
