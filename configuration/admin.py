from django.contrib import admin

from configuration.models import Configuration


@admin.register(Configuration)
class ConfigurationAdmin(admin.ModelAdmin):
    list_display = ("key", "data_type", "display_value", "description")
    list_filter = ("data_type",)
    search_fields = ("key", "description")

    @admin.display(description="Value")
    def display_value(self, obj):
        return obj.get_display_value()
