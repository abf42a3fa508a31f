from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin

from .models import User


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    fieldsets = UserAdmin.fieldsets + (
        (
            "Test Series Profile",
            {
                "fields": (
                    "display_name",
                    "photo_url",
                    "exam_type",
                    "current_standard",
                    "college",
                    "district",
                    "province",
                    "phone_number",
                )
            },
        ),
        (
            "Series Access",
            {"fields": ("ioe_access", "cee_access", "live_test_access")},
        ),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        (
            "Test Series Profile",
            {"fields": ("email", "display_name", "exam_type", "current_standard")},
        ),
    )
    list_display = (
        "username",
        "email",
        "display_name",
        "exam_type",
        "ioe_access",
        "cee_access",
        "live_test_access",
        "is_staff",
    )
    list_filter = UserAdmin.list_filter + ("exam_type", "ioe_access", "cee_access", "live_test_access")
    search_fields = ("username", "email", "display_name", "phone_number")
    actions = ("grant_live_test_access", "revoke_series_access")

    @admin.action(description="Grant live test access to selected users")
    def grant_live_test_access(self, request, queryset):
        updated = queryset.filter(live_test_access=False).update(live_test_access=True)
        self.message_user(request, f"Granted Live Test Access to {updated} users.", level=messages.INFO)

    @admin.action(description="Revoke all series access for selected users")
    def revoke_series_access(self, request, queryset):
        updated = queryset.update(ioe_access=False, cee_access=False, live_test_access=False)
        if not updated:
            self.message_user(request, "No user selected for access revocation.", level=messages.WARNING)
            return
        self.message_user(request, f"Revoked series access for {updated} users.", level=messages.INFO)
