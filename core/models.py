from django.db import models
from django.contrib.auth import get_user_model

User = get_user_model()


ROLE_CHOICES = (
    ('ORG', 'Organization Admin'),
    ('DEPT', 'Department Admin'),
    ('STAFF', 'Staff'),
)


class Organization(models.Model):
    name = models.CharField(max_length=255)
    created = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class Department(models.Model):
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='departments')
    code = models.CharField(max_length=20, blank=True)
    name = models.CharField(max_length=100)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.code} - {self.name}" if self.code else self.name


class Account(models.Model):
    """Portal login with the tenant scope every API call is checked against."""

    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='account')
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='DEPT')
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='accounts')
    department = models.ForeignKey(Department, on_delete=models.CASCADE, null=True, blank=True, related_name='accounts')

    def __str__(self):
        return f"{self.user.username} ({self.role})"


class Subject(models.Model):
    department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='subjects')
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=50, blank=True)
    semester = models.CharField(max_length=50, blank=True, default='')

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.code} - {self.name}" if self.code else self.name


class Staff(models.Model):
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='staff')
    department = models.ForeignKey(Department, on_delete=models.SET_NULL, null=True, blank=True, related_name='staff')
    name = models.CharField(max_length=100, blank=True, null=True)
    email = models.EmailField(max_length=254, blank=True, null=True)
    # Older deployments keep assignments here instead of StaffSubject:
    # a JSON array of ids (or {"id": ..} objects) or a comma separated list.
    subjects = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['name']

    @property
    def display_name(self):
        return self.name or f"Staff {self.pk}"

    def __str__(self):
        dept_name = self.department.name if self.department else "No Department"
        return f"{self.display_name} {dept_name}"


class StaffSubject(models.Model):
    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='subject_links')
    subject = models.ForeignKey(Subject, on_delete=models.CASCADE, related_name='staff_links')

    class Meta:
        unique_together = ('staff', 'subject')

    def __str__(self):
        return f"{self.staff_id} -> {self.subject_id}"


class Notification(models.Model):
    type = models.CharField(max_length=64)
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True, default='')
    link = models.CharField(max_length=512, blank=True, default='')
    role_scope = models.CharField(max_length=30, default='DepartmentAdmin')
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, null=True, blank=True, related_name='notifications')
    department = models.ForeignKey(Department, on_delete=models.CASCADE, null=True, blank=True, related_name='notifications')
    created_at = models.DateTimeField(auto_now_add=True)
    is_read = models.BooleanField(default=False)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"[{self.type}] {self.title}"
