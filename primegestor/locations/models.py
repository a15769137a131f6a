from django.db import models


class Warehouse(models.Model):
    """Warehouses - shown to shop users as colours ("Cor")"""
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=255, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'warehouses'
        ordering = ['name']
