from django import forms
from django.contrib.auth import authenticate, get_user_model
from django.core.exceptions import ValidationError

User = get_user_model()

INVALID_CREDENTIALS = 'The provided credentials are incorrect.'
ACCOUNT_NOT_ACTIVE = 'Your account is not active. Please contact support.'


class AdminLoginForm(forms.Form):
    email = forms.EmailField(widget=forms.EmailInput(attrs={'class': 'form-control'}))
    password = forms.CharField(widget=forms.PasswordInput(attrs={'class': 'form-control'}))
    remember = forms.BooleanField(required=False)

    def __init__(self, request=None, *args, **kwargs):
        self.request = request
        self.user_cache = None
        super().__init__(*args, **kwargs)

    def clean(self):
        email = self.cleaned_data.get('email')
        password = self.cleaned_data.get('password')

        if email and password:
            user = User.objects.filter(email__iexact=email, role=User.ROLE_ADMIN).first()
            if user is None:
                raise ValidationError(INVALID_CREDENTIALS, code='invalid_login')

            if not user.is_account_active():
                raise ValidationError(ACCOUNT_NOT_ACTIVE, code='inactive')

            self.user_cache = authenticate(self.request, username=user.username, password=password)
            if self.user_cache is None:
                raise ValidationError(INVALID_CREDENTIALS, code='invalid_login')

        return self.cleaned_data

    def get_user(self):
        return self.user_cache


class PhoneLoginForm(forms.Form):
    phone = forms.CharField(max_length=20, widget=forms.TextInput(attrs={'class': 'form-control'}))
    pin = forms.CharField(
        min_length=5,
        max_length=5,
        widget=forms.PasswordInput(attrs={'class': 'form-control', 'inputmode': 'numeric'}),
    )

    def __init__(self, request=None, *args, **kwargs):
        self.request = request
        self.user_cache = None
        super().__init__(*args, **kwargs)

    def clean_pin(self):
        pin = self.cleaned_data['pin']
        if not pin.isdigit():
            raise ValidationError('PIN must contain digits only.')
        return pin

    def clean(self):
        phone = self.cleaned_data.get('phone')
        pin = self.cleaned_data.get('pin')

        if phone and pin:
            user = User.objects.filter(phone=phone).first()
            if user is not None and user.can_use_phone_login() and not user.is_account_active():
                raise ValidationError(ACCOUNT_NOT_ACTIVE, code='inactive')

            self.user_cache = authenticate(self.request, phone=phone, pin=pin)
            if self.user_cache is None:
                raise ValidationError(INVALID_CREDENTIALS, code='invalid_login')

        return self.cleaned_data

    def get_user(self):
        return self.user_cache
