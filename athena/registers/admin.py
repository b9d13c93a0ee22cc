from django.contrib import admin
from .models import Nr, Tsn, Tsp, Sob


class RegisterEntryAdmin(admin.ModelAdmin):
    list_display = ['name', 'keterangan', 'created_at', 'updated_at']
    search_fields = ['name', 'keterangan']
    ordering = ['name']


admin.site.register(Nr, RegisterEntryAdmin)
admin.site.register(Tsn, RegisterEntryAdmin)
admin.site.register(Tsp, RegisterEntryAdmin)
admin.site.register(Sob, RegisterEntryAdmin)
