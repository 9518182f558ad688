from django.contrib import admin
from django.utils import timezone

from .models import BloodUnit, DonationRequest


class BloodUnitInline(admin.TabularInline):
    model = BloodUnit
    extra = 0
    fields = ['unit_number', 'barcode', 'volume', 'status', 'expiry_date']
    readonly_fields = ['unit_number', 'barcode', 'volume', 'expiry_date']
    can_delete = False


@admin.register(DonationRequest)
class DonationRequestAdmin(admin.ModelAdmin):
    list_display   = ['id', 'donor', 'blood_bank', 'donor_blood_type', 'urgency_level', 'status', 'has_certificate', 'created_at']
    list_filter    = ['status', 'urgency_level', 'donor_blood_type']
    search_fields  = ['id', 'donor__name', 'blood_bank__name']
    readonly_fields = ['id', 'certificate_url', 'created_at', 'updated_at']
    inlines        = [BloodUnitInline]

    fieldsets = (
        ('Request', {
            'fields': ('id', 'donor', 'patient', 'blood_bank', 'donor_blood_type', 'urgency_level', 'status')
        }),
        ('Certificate', {
            'fields': ('certificate_url',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(boolean=True, description='Certificate')
    def has_certificate(self, obj):
        return bool(obj.certificate_url)


@admin.register(BloodUnit)
class BloodUnitAdmin(admin.ModelAdmin):
    list_display   = ['barcode', 'donor_name', 'donor_blood_type', 'blood_bank_name', 'status', 'donation_date', 'expiry_date']
    list_filter    = ['status', 'donor_blood_type', 'blood_bank']
    search_fields  = ['barcode', 'donor_name', 'blood_bank_name']
    ordering       = ['-donation_date']
    readonly_fields = ['id', 'donation_request', 'barcode', 'created_at', 'updated_at']

    actions = ['mark_used', 'mark_discarded']

    @admin.action(description='Mark selected units as used')
    def mark_used(self, request, queryset):
        updated = queryset.filter(status=BloodUnit.AVAILABLE).update(status=BloodUnit.USED, updated_at=timezone.now())
        self.message_user(request, f'{updated} unit(s) marked as used.')

    @admin.action(description='Mark selected units as discarded')
    def mark_discarded(self, request, queryset):
        updated = queryset.update(status=BloodUnit.DISCARDED, updated_at=timezone.now())
        self.message_user(request, f'{updated} unit(s) marked as discarded.')
