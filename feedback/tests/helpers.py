from django.contrib.auth import get_user_model

from core.models import Account, Department, Organization, Staff, StaffSubject, Subject
from feedback.models import FeedbackForm


def make_tenant(org_name='Northfield College', dept_name='Computer Science'):
    organization = Organization.objects.create(name=org_name)
    department = Department.objects.create(organization=organization, name=dept_name, code=dept_name[:3].upper())
    return organization, department


def make_user(username, role, organization, department=None):
    user = get_user_model().objects.create_user(username=username, password='secret')
    Account.objects.create(user=user, role=role, organization=organization, department=department)
    return user


def make_subject(department, name, semester='3', code=''):
    return Subject.objects.create(department=department, name=name, semester=semester, code=code)


def make_staff(organization, department, name, subjects=None, teaches=()):
    staff = Staff.objects.create(organization=organization, department=department, name=name, subjects=subjects)
    for subject in teaches:
        StaffSubject.objects.create(staff=staff, subject=subject)
    return staff


def make_form(organization, department, staff_ids, subject_ids, questions=None, is_active=True, title='End of term feedback'):
    return FeedbackForm.objects.create(
        organization=organization,
        department=department,
        title=title,
        semester='3',
        staff_ids=staff_ids,
        subject_ids=subject_ids,
        questions=questions if questions is not None else [{'id': 1, 'text': 'How was the course?', 'type': 'SHORT'}],
        is_active=is_active,
    )
