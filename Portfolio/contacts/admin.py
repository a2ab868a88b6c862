from django.contrib import admin

from .models import ContactSubmission


class ContactSubmissionAdmin(admin.ModelAdmin):
    list_display = ('name', 'email', 'received_at')
    search_fields = ('name', 'email', 'message')
    readonly_fields = ('name', 'email', 'message', 'received_at')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

admin.site.register(ContactSubmission, ContactSubmissionAdmin)
