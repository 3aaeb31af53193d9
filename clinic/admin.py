"""
Django admin registrations for the clinic models.

This module hooks the clinic models into Django's built-in admin
interface so that superusers can inspect and correct records via the
``/admin/`` URL.  Stock levels should normally be changed through the
API so that a transaction is recorded; the admin is meant for fixing
master data such as categories and suppliers.
"""

from django.contrib import admin

from .models import (
    Activity,
    Category,
    Client,
    ClinicLog,
    ClinicLogItem,
    HealthCheckRequest,
    InventoryItem,
    InventoryTransaction,
    Issuer,
    Patient,
    Reimbursement,
    Supplier,
    User,
    UserSettings,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'role', 'nurse_id', 'is_staff', 'is_superuser')
    list_filter = ('role',)
    search_fields = ('username', 'email', 'first_name', 'last_name', 'nurse_id')


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'item_type')
    list_filter = ('item_type',)
    search_fields = ('name',)


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')
    search_fields = ('name',)


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ('name', 'item_type', 'category', 'stock', 'reorder_level', 'unit', 'supplier')
    list_filter = ('item_type', 'category')
    search_fields = ('name', 'description')


@admin.register(InventoryTransaction)
class InventoryTransactionAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'type', 'item_name', 'quantity', 'previous_stock', 'new_stock', 'user_name')
    list_filter = ('type', 'item_type')
    search_fields = ('item_name', 'reason')
    readonly_fields = ('created_at',)


class ClinicLogItemInline(admin.TabularInline):
    model = ClinicLogItem
    extra = 0


@admin.register(ClinicLog)
class ClinicLogAdmin(admin.ModelAdmin):
    list_display = ('date', 'last_name', 'first_name', 'employee_number', 'client', 'nurse_name', 'status')
    list_filter = ('status', 'sex', 'client')
    search_fields = ('last_name', 'first_name', 'employee_number', 'chief_complaint')
    inlines = [ClinicLogItemInline]


@admin.register(Reimbursement)
class ReimbursementAdmin(admin.ModelAdmin):
    list_display = ('date', 'employee_id', 'full_name_employee', 'amount_requested', 'status')
    list_filter = ('status', 'work_location')
    search_fields = ('employee_id', 'full_name_employee', 'email')


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'type', 'title', 'user_name', 'status')
    list_filter = ('type',)
    search_fields = ('title', 'description')


@admin.register(UserSettings)
class UserSettingsAdmin(admin.ModelAdmin):
    list_display = ('user', 'theme', 'items_per_page', 'currency')


@admin.register(Client, Issuer)
class NamedEntryAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('last_name', 'first_name', 'employee_id', 'email', 'company', 'last_visited')
    list_filter = ('gender', 'company')
    search_fields = ('last_name', 'first_name', 'employee_id', 'email')


@admin.register(HealthCheckRequest)
class HealthCheckRequestAdmin(admin.ModelAdmin):
    list_display = ('request_date', 'agent_name', 'employee_id', 'client', 'status', 'nurse_name')
    list_filter = ('status',)
    search_fields = ('agent_name', 'employee_id', 'client')
    readonly_fields = ('request_date',)
