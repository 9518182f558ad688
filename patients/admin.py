from django.contrib import admin

from .models import Patient


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display  = ['name', 'blood_type', 'city', 'phone', 'blood_bank', 'created_at']
    list_filter   = ['blood_type', 'city']
    search_fields = ['name', 'user__email', 'phone']
    readonly_fields = ['created_at', 'updated_at']
