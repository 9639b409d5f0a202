from django.contrib import admin
from .models import Organization, Department, Account, Subject, Staff, StaffSubject, Notification


class StaffSubjectInline(admin.TabularInline):
	model = StaffSubject
	extra = 1


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
	list_display = ('name', 'code', 'organization')
	list_filter = ('organization',)
	search_fields = ('name', 'code')


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
	list_display = ('user', 'role', 'organization', 'department')
	list_filter = ('role', 'organization')
	search_fields = ('user__username',)


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
	list_display = ('name', 'code', 'semester', 'department')
	list_filter = ('department', 'semester')
	search_fields = ('name', 'code')


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
	inlines = [StaffSubjectInline]
	list_display = ('id', 'name', 'email', 'department')
	list_filter = ('department',)
	search_fields = ('name', 'email')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
	list_display = ('type', 'title', 'role_scope', 'department', 'created_at', 'is_read')
	list_filter = ('type', 'is_read')


admin.site.register(Organization)
