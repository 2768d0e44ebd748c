from django import forms
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.utils.translation import gettext_lazy as _
from django.core.exceptions import ValidationError

from .actor import AGENT, COUNSELOR, ROLE_CHOICES

User = get_user_model()


# LOGIN FORM
class LoginForm(forms.Form):
    email = forms.EmailField(label=_('Email Address'), max_length=255, required=True)
    password = forms.CharField(label=_('Password'), required=True, strip=False)
    remember = forms.BooleanField(label=_('Remember me'), required=False, initial=False)

    def clean_email(self):

        email = self.cleaned_data.get('email', '')
        return email.lower().strip()


# SIGNUP FORM
class SignupForm(forms.ModelForm):
    """
    Self-service registration

    Every account created here is an agent; the role can only be raised
    afterwards by an admin.
    """

    role = AGENT

    password1 = forms.CharField(label=_('Password'), strip=False)
    password2 = forms.CharField(label=_('Confirm Password'), strip=False)

    class Meta:
        model = User
        fields = ['email', 'username']
        labels = {
            'username': _('Display Name'),
        }

    def clean_email(self):
        email = self.cleaned_data.get('email', '').lower().strip()

        # Check if email already exists
        if User.objects.filter(email=email).exists():
            raise ValidationError(
                _('A user with this email already exists.')
            )

        return email

    def clean_username(self):
        return self.cleaned_data.get('username', '').strip()

    def clean_password2(self):
        password1 = self.cleaned_data.get('password1')
        password2 = self.cleaned_data.get('password2')

        if password1 and password2 and password1 != password2:
            raise ValidationError(_('The two password fields didn\'t match.'))

        if password2:
            validate_password(password2)

        return password2

    def save(self, commit=True):
        user = super().save(commit=False)
        user.role = self.role
        user.set_password(self.cleaned_data['password1'])
        if commit:
            user.save()
        return user


# COUNSELOR CREATE FORM (admin only)
class CounselorCreateForm(SignupForm):
    role = COUNSELOR

    def clean_username(self):
        username = super().clean_username()
        if not username:
            raise ValidationError(_('Counselors need a display name.'))
        return username


# ROLE CHANGE FORM (admin only)
class RoleChangeForm(forms.Form):
    role = forms.ChoiceField(label=_('Role'), choices=ROLE_CHOICES)
