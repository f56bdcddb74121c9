import logging

from django.contrib import messages
from django.contrib.auth import login, logout
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views import View

from core.services import audit
from core.services.session_store import session_store
from core.utils.request_context import wants_json

from .forms import AdminLoginForm, PhoneLoginForm

logger = logging.getLogger(__name__)


def serialize_user(user):
    return {
        'id': user.pk,
        'name': user.get_full_name(),
        'email': user.email,
        'phone': user.phone,
        'role': user.role,
    }


class BaseLoginView(View):
    template_name = None
    form_class = None

    def dispatch(self, request, *args, **kwargs):
        if request.user.is_authenticated:
            return redirect(request.user.get_dashboard_url_name())
        return super().dispatch(request, *args, **kwargs)

    def get(self, request):
        return render(request, self.template_name, {'form': self.form_class()})

    def post(self, request):
        form = self.form_class(request, data=request.POST)
        if form.is_valid():
            return self.form_valid(form)
        return self.form_invalid(form)

    def form_valid(self, form):
        request = self.request
        user = form.get_user()
        login(request, user)
        if not request.session.session_key:
            request.session.save()

        self.apply_session_expiry(form)
        user.mark_login()
        session_store.create(user, request.session.session_key, request=request)
        audit.log_login(user, request=request)
        logger.info(f"User {user.pk} ({user.role}) logged in")

        redirect_url = reverse(user.get_dashboard_url_name())
        if wants_json(request):
            return JsonResponse({
                'success': True,
                'message': 'Login successful',
                'data': {'user': serialize_user(user), 'redirect': redirect_url},
            })

        messages.success(request, f'Welcome back, {user.get_full_name()}!')
        return redirect(redirect_url)

    def form_invalid(self, form):
        errors = [str(error) for error in form.non_field_errors()] or ['Please correct the errors below.']
        if wants_json(self.request):
            return JsonResponse({
                'success': False,
                'message': errors[0],
                'errors': form.errors.get_json_data(),
            }, status=422)

        messages.error(self.request, errors[0])
        return render(self.request, self.template_name, {'form': form}, status=200)

    def apply_session_expiry(self, form):
        pass


class AdminLoginView(BaseLoginView):
    """Email and password login, admins only."""
    template_name = 'accounts/login.html'
    form_class = AdminLoginForm

    def apply_session_expiry(self, form):
        if not form.cleaned_data.get('remember'):
            self.request.session.set_expiry(0)


class PhoneLoginView(BaseLoginView):
    """Phone and PIN login for leaders and members."""
    template_name = 'accounts/phone_login.html'
    form_class = PhoneLoginForm


class SignOutView(View):
    """
    Logout is also where the browser idle monitor lands after the server
    already expired the session, so an anonymous request still succeeds.
    POST only, so other sites cannot log users out with a link.
    """

    def post(self, request):
        if request.user.is_authenticated:
            user = request.user
            session_key = request.session.session_key
            if session_key:
                session_store.deactivate(user, session_key)
            audit.log_logout(user, request=request)
            logout(request)
            logger.info(f"User {user.pk} logged out")
            if not wants_json(request):
                messages.success(request, 'You have been logged out successfully')

        if wants_json(request):
            return JsonResponse({'success': True, 'message': 'Logged out successfully'})
        return redirect('home')
