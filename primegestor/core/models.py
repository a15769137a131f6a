from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.utils import timezone


class PrimeUserManager(UserManager):
    """User manager that falls back to the e-mail address as username"""

    def create_user(self, username=None, email=None, password=None, **extra_fields):
        return super().create_user(username or email, email, password, **extra_fields)

    def create_superuser(self, username=None, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', User.ROLE_ADMIN)
        return super().create_superuser(username or email, email, password, **extra_fields)

    def get_by_natural_key(self, username):
        # E-mail lookups ignore case, matching forgot-password and user creation
        return self.get(**{f'{self.model.USERNAME_FIELD}__iexact': username})


class User(AbstractUser):
    """Application user, authenticated by e-mail"""
    ROLE_ADMIN = 'admin'
    ROLE_EMPLOYEE = 'employee'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Admin'),
        (ROLE_EMPLOYEE, 'Employee'),
    ]

    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=200)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_EMPLOYEE)
    reset_token = models.CharField(max_length=100, blank=True, null=True, db_index=True)
    reset_token_expiry = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    objects = PrimeUserManager()

    def __str__(self):
        return self.full_name or self.email

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN or self.is_superuser

    def has_valid_reset_token(self, token):
        return (
            bool(self.reset_token)
            and self.reset_token == token
            and self.reset_token_expiry is not None
            and self.reset_token_expiry >= timezone.now()
        )

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']


class ActivityLog(models.Model):
    """Activity log for mutations performed through the API"""
    ACTION_CHOICES = [
        ('CREATE', 'Create'),
        ('UPDATE', 'Update'),
        ('DELETE', 'Delete'),
    ]

    ENTITY_CHOICES = [
        ('PRODUCT', 'Product'),
        ('PRODUCT_PHOTO', 'Product Photo'),
        ('PURCHASE', 'Purchase'),
        ('SALE', 'Sale'),
        ('SUPPLIER', 'Supplier'),
        ('CUSTOMER', 'Customer'),
        ('WAREHOUSE', 'Warehouse'),
        ('USER', 'User'),
    ]

    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='activity_logs')
    action = models.CharField(max_length=20, choices=ACTION_CHOICES)
    entity_type = models.CharField(max_length=30, choices=ENTITY_CHOICES)
    entity_id = models.CharField(max_length=100, blank=True, null=True)
    entity_name = models.CharField(max_length=255, blank=True, null=True, help_text="Human-readable name of the object (e.g., product name)")
    details = models.TextField(blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.action} {self.entity_type} #{self.entity_id}"

    class Meta:
        db_table = 'activity_logs'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['-created_at'], name='idx_activity_created'),
            models.Index(fields=['action'], name='idx_activity_action'),
            models.Index(fields=['entity_type'], name='idx_activity_entity_type'),
        ]
