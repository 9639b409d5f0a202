from django.contrib import admin
from .models import (
	Question, FeedbackForm, FeedbackResponse,
	LegacyForm, LegacyFormQuestion, LegacyFormAssignment, LegacyResponse, LegacyAnswer,
)


@admin.register(FeedbackForm)
class FeedbackFormAdmin(admin.ModelAdmin):
	list_display = ('title', 'semester', 'department', 'is_active', 'access_code', 'created_at')
	list_filter = ('is_active', 'department')
	search_fields = ('title', 'access_code')
	readonly_fields = ('access_code', 'share_url')


@admin.register(FeedbackResponse)
class FeedbackResponseAdmin(admin.ModelAdmin):
	list_display = ('form', 'name', 'email', 'subject_id', 'staff_id', 'submitted_at')
	list_filter = ('form',)
	search_fields = ('name', 'email')


class LegacyFormQuestionInline(admin.TabularInline):
	model = LegacyFormQuestion
	extra = 1


class LegacyFormAssignmentInline(admin.TabularInline):
	model = LegacyFormAssignment
	extra = 1


@admin.register(LegacyForm)
class LegacyFormAdmin(admin.ModelAdmin):
	inlines = [LegacyFormQuestionInline, LegacyFormAssignmentInline]
	list_display = ('title', 'department', 'is_active', 'access_code')
	readonly_fields = ('access_code',)


admin.site.register(Question)
admin.site.register(LegacyResponse)
admin.site.register(LegacyAnswer)
