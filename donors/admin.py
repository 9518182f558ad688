from django.contrib import admin

from .models import Donor


@admin.register(Donor)
class DonorAdmin(admin.ModelAdmin):
    list_display   = ['name', 'blood_type', 'age', 'city', 'blood_bank', 'is_available', 'donation_count']
    list_filter    = ['blood_type', 'is_available', 'city']
    search_fields  = ['name', 'user__email', 'phone']
    ordering       = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']

    fieldsets = (
        ('Personal Info', {
            'fields': ('user', 'name', 'age', 'phone', 'blood_type')
        }),
        ('Location', {
            'fields': ('city', 'state', 'blood_bank')
        }),
        ('Availability', {
            'fields': ('is_available',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(description='Donations')
    def donation_count(self, obj):
        return obj.donation_requests.filter(status='success').count()

    actions = ['mark_unavailable']

    @admin.action(description='Mark selected donors as unavailable')
    def mark_unavailable(self, request, queryset):
        updated = queryset.update(is_available=False)
        self.message_user(request, f'{updated} donor(s) marked unavailable.')
