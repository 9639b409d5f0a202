from django.urls import path
from . import views

urlpatterns = [
    path('department/analytics', views.department_analytics, name='feedback_department_analytics'),
    path('department/forms-with-counts', views.department_forms_with_counts, name='feedback_forms_with_counts'),
    path('meta', views.meta, name='feedback_meta'),
    path('simple/forms', views.simple_forms, name='feedback_simple_forms'),
    path('simple/forms/<int:form_id>', views.simple_form_detail, name='feedback_simple_form_detail'),
    path('simple/forms/<int:form_id>/publish', views.simple_form_publish, name='feedback_simple_form_publish'),
    path('forms/<str:slug>/responses', views.form_responses, name='feedback_form_responses'),
    path('forms/<str:slug>/responses.csv', views.form_responses_csv, name='feedback_form_responses_csv'),
    path('public/simple/<str:access_code>', views.public_simple_form, name='feedback_public_simple_form'),
    path('public/simple/<str:access_code>/submit', views.public_simple_submit, name='feedback_public_simple_submit'),
    path('public/form/<str:access_code>', views.public_legacy_form, name='feedback_public_legacy_form'),
    path('public/submit/<str:access_code>', views.public_legacy_submit, name='feedback_public_legacy_submit'),
    path('org/activity', views.org_activity, name='feedback_org_activity'),
    path('org/activity.csv', views.org_activity_csv, name='feedback_org_activity_csv'),
    path('org/stats/total-feedback', views.org_total_feedback, name='feedback_org_total_feedback'),
    path('org/stats/subject-responses', views.org_subject_responses, name='feedback_org_subject_responses'),
    path('org/stats/staff-responses', views.org_staff_responses, name='feedback_org_staff_responses'),
    path('org/stats/department-responses', views.org_department_responses, name='feedback_org_department_responses'),
]
