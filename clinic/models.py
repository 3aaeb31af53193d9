"""
Database models for the clinic backend.

These models capture the day-to-day records of the company clinic:
visits logged by nurses (with the medicines and supplies issued),
the medicine/supply inventory and its stock movements, employee
reimbursement requests, the client, issuer and patient directories,
health-check requests and a recent-activity feed.  Field names follow
the front-end forms so records convert to JSON with little mapping.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Custom user model with a clinic role.

    Roles mirror the front-end roles: 'nurse', 'admin' and 'staff'.
    Nurses carry a nurse ID which is printed on the logs they create.
    """
    ROLE_CHOICES = [
        ('nurse', 'Nurse'),
        ('admin', 'Administrator'),
        ('staff', 'Staff'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='nurse')
    nurse_id = models.CharField(max_length=20, blank=True)
    department = models.CharField(max_length=100, blank=True)

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Category(models.Model):
    """Medicine or supply category (e.g. 'Analgesic', 'Bandages')."""
    TYPE_MEDICINE = 'Medicine'
    TYPE_SUPPLY = 'Supply'
    TYPE_CHOICES = ((TYPE_MEDICINE, 'Medicine'), (TYPE_SUPPLY, 'Supply'))

    item_type = models.CharField(max_length=10, choices=TYPE_CHOICES, db_index=True)
    name = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [('item_type', 'name')]
        ordering = ['name']

    def __str__(self) -> str:
        return f"{self.name} ({self.item_type})"


class Supplier(models.Model):
    name = models.CharField(max_length=150, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class InventoryItem(models.Model):
    """A stocked medicine or supply.

    Medicines and supplies share one table and are told apart by
    ``item_type``.  ``stock`` is kept in whole units.
    """
    TYPE_MEDICINE = 'medicine'
    TYPE_SUPPLY = 'supply'
    TYPE_CHOICES = ((TYPE_MEDICINE, 'Medicine'), (TYPE_SUPPLY, 'Supply'))

    item_type = models.CharField(max_length=10, choices=TYPE_CHOICES, db_index=True)
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    category = models.ForeignKey(
        Category, null=True, blank=True, on_delete=models.PROTECT, related_name='items'
    )
    supplier = models.ForeignKey(
        Supplier, null=True, blank=True, on_delete=models.SET_NULL, related_name='items'
    )
    stock = models.PositiveIntegerField(default=0)
    reorder_level = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    unit = models.CharField(max_length=30, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [('item_type', 'name')]
        ordering = ['name']

    @property
    def stock_status(self) -> str:
        if self.stock == 0:
            return 'Out of Stock'
        if self.stock <= self.reorder_level:
            return 'Low Stock'
        return 'In Stock'

    def __str__(self) -> str:
        return f"{self.name} [{self.item_type}] x{self.stock}"


class InventoryTransaction(models.Model):
    """A stock movement.  Item name/type are copied so history survives deletes."""
    TYPE_STOCK_IN = 'stock_in'
    TYPE_STOCK_OUT = 'stock_out'
    TYPE_ADJUSTMENT = 'adjustment'
    TYPE_CHOICES = (
        (TYPE_STOCK_IN, 'Stock in'),
        (TYPE_STOCK_OUT, 'Stock out'),
        (TYPE_ADJUSTMENT, 'Adjustment'),
    )

    type = models.CharField(max_length=12, choices=TYPE_CHOICES, db_index=True)
    item = models.ForeignKey(
        InventoryItem, null=True, blank=True, on_delete=models.SET_NULL, related_name='transactions'
    )
    item_type = models.CharField(max_length=10, choices=InventoryItem.TYPE_CHOICES)
    item_name = models.CharField(max_length=150)
    quantity = models.IntegerField()
    previous_stock = models.PositiveIntegerField()
    new_stock = models.PositiveIntegerField()
    reason = models.CharField(max_length=255, blank=True)
    user = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    user_name = models.CharField(max_length=150, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [models.Index(fields=['item_type', 'created_at'], name='clinic_inve_item_ty_5c1f0e_idx')]

    def __str__(self) -> str:
        return f"{self.type} {self.item_name} {self.quantity:+d}"


class ClinicLog(models.Model):
    """One clinic visit: who came in, why, and what was issued."""
    SEX_CHOICES = (('Male', 'Male'), ('Female', 'Female'))
    STATUS_ACTIVE = 'active'
    STATUS_ARCHIVED = 'archived'
    STATUS_CHOICES = ((STATUS_ACTIVE, 'Active'), (STATUS_ARCHIVED, 'Archived'))

    date = models.DateField(db_index=True)
    last_name = models.CharField(max_length=50)
    first_name = models.CharField(max_length=50)
    sex = models.CharField(max_length=6, choices=SEX_CHOICES)
    employee_number = models.CharField(max_length=20, db_index=True)
    client = models.CharField(max_length=100)
    chief_complaint = models.CharField(max_length=200)
    issued_by = models.CharField(max_length=100)
    nurse = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='clinic_logs')
    nurse_name = models.CharField(max_length=150, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-id']

    def __str__(self) -> str:
        return f"{self.last_name}, {self.first_name} on {self.date}"


class ClinicLogItem(models.Model):
    """A medicine or supply line issued during a visit."""
    KIND_MEDICINE = 'medicine'
    KIND_SUPPLY = 'supply'
    KIND_CHOICES = ((KIND_MEDICINE, 'Medicine'), (KIND_SUPPLY, 'Supply'))

    clinic_log = models.ForeignKey(ClinicLog, on_delete=models.CASCADE, related_name='items')
    kind = models.CharField(max_length=10, choices=KIND_CHOICES)
    inventory_item = models.ForeignKey(
        InventoryItem, null=True, blank=True, on_delete=models.SET_NULL, related_name='issued_lines'
    )
    name = models.CharField(max_length=150)
    custom_name = models.CharField(max_length=150, blank=True)
    quantity = models.PositiveIntegerField()

    class Meta:
        ordering = ['name', 'id']

    def __str__(self) -> str:
        return f"{self.kind} {self.name} x{self.quantity}"


class Reimbursement(models.Model):
    """Medical expense reimbursement requested by an employee."""
    LOCATION_CHOICES = (('Office', 'Office'), ('WFH', 'WFH'))
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    )

    date = models.DateField()
    employee_id = models.CharField(max_length=50, db_index=True)
    full_name_employee = models.CharField(max_length=150)
    full_name_dependent = models.CharField(max_length=150, blank=True)
    work_location = models.CharField(max_length=6, choices=LOCATION_CHOICES)
    receipt_date = models.DateField()
    amount_requested = models.DecimalField(max_digits=12, decimal_places=2)
    email = models.EmailField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    submitted_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='reimbursements'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"{self.full_name_employee} {self.amount_requested} ({self.status})"


class Activity(models.Model):
    """Entry of the recent-activity feed shown on the dashboard."""
    TYPE_CHOICES = (
        ('clinic_log', 'Clinic log'),
        ('reimbursement', 'Reimbursement'),
        ('approval', 'Approval'),
        ('rejection', 'Rejection'),
        ('inventory', 'Inventory'),
        ('health_check', 'Health check'),
    )
    type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    user_name = models.CharField(max_length=150, blank=True)
    status = models.CharField(max_length=32, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [models.Index(fields=['type', 'created_at'], name='clinic_acti_type_8b2d4a_idx')]

    def __str__(self) -> str:
        return f"{self.type}: {self.title}"


class UserSettings(models.Model):
    """Per-user display preferences."""
    THEME_CHOICES = (('light', 'Light'), ('dark', 'Dark'), ('system', 'System'))

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='settings')
    theme = models.CharField(max_length=10, choices=THEME_CHOICES, default='system')
    language = models.CharField(max_length=10, default='en')
    notifications = models.BooleanField(default=True)
    auto_save = models.BooleanField(default=True)
    items_per_page = models.PositiveSmallIntegerField(default=10)
    date_format = models.CharField(max_length=20, default='MM/dd/yyyy')
    currency = models.CharField(max_length=10, default='PHP')

    def __str__(self) -> str:
        return f"settings for {self.user_id}"


class Client(models.Model):
    """Client account an employee works for; offered on the clinic log form."""
    name = models.CharField(max_length=100, unique=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Issuer(models.Model):
    """Person who can be named as 'issued by' on a clinic log."""
    name = models.CharField(max_length=100, unique=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Patient(models.Model):
    """Employee known to the clinic.

    ``last_visited`` follows the clinic logs written for the patient's
    employee ID.
    """
    GENDER_CHOICES = (('Male', 'Male'), ('Female', 'Female'))

    employee_id = models.CharField(max_length=20, blank=True, db_index=True)
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    birthday = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=6, choices=GENDER_CHOICES, blank=True)
    company = models.CharField(max_length=100, blank=True)
    medical_history = models.TextField(blank=True)
    last_visited = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['last_name', 'first_name', 'id']

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __str__(self) -> str:
        return self.full_name


class HealthCheckRequest(models.Model):
    """An agent asked to come to the clinic for a health check.

    Status moves forward only: pending -> notified -> in_clinic -> completed.
    """
    STATUS_PENDING = 'pending'
    STATUS_NOTIFIED = 'notified'
    STATUS_IN_CLINIC = 'in_clinic'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_NOTIFIED, 'Notified'),
        (STATUS_IN_CLINIC, 'In clinic'),
        (STATUS_COMPLETED, 'Completed'),
    )

    agent_name = models.CharField(max_length=150)
    employee_id = models.CharField(max_length=20)
    client = models.CharField(max_length=100)
    reason = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    requested_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='health_check_requests'
    )
    nurse = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    nurse_name = models.CharField(max_length=150, blank=True)
    request_date = models.DateTimeField(auto_now_add=True)
    notified_at = models.DateTimeField(null=True, blank=True)
    arrived_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-request_date', '-id']

    def __str__(self) -> str:
        return f"{self.agent_name} ({self.status})"
