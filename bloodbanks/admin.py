from django.contrib import admin

from .models import BloodBank


@admin.register(BloodBank)
class BloodBankAdmin(admin.ModelAdmin):
    list_display  = ['name', 'admin_name', 'city', 'license_number', 'total_blood_bags', 'is_verified']
    list_filter   = ['is_verified', 'city']
    search_fields = ['name', 'license_number', 'user__email']
    readonly_fields = ['created_at', 'updated_at']

    actions = ['verify_blood_banks']

    @admin.action(description='Mark selected blood banks as verified')
    def verify_blood_banks(self, request, queryset):
        updated = queryset.update(is_verified=True)
        self.message_user(request, f'{updated} blood bank(s) verified.')
