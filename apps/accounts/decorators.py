# Decorators in this file:
# 1. api_login_required - Authenticated users only, JSON 401 otherwise
# 2. json_post_required - POST only, JSON 405 otherwise
#
# The CRM views are consumed by a separately served front end, so every
# refusal is a JSON body with the same {'success': False, 'error': ...} shape.
# ==============================================================================

from functools import wraps
from django.http import JsonResponse
from django.utils.translation import gettext_lazy as _


def api_login_required(view_func):
    """
    Decorator: Only authenticated users can access this view

    Unlike django.contrib.auth's login_required, no redirect is issued:
    the caller gets a 401 it can turn into a sign-in prompt.

    Usage:
    @api_login_required
    def contact_list_view(request):
        # request.user is guaranteed to be a real user here
        ...
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if request.user.is_authenticated and request.user.is_active:
            return view_func(request, *args, **kwargs)

        return JsonResponse({
            'success': False,
            'error': str(_('Authentication required')),
        }, status=401)

    return wrapper


def json_post_required(view_func):
    """
    Decorator: Only POST requests allowed

    Destructive and mutating actions (create, update, delete, column
    changes) are POST only.
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if request.method == 'POST':
            return view_func(request, *args, **kwargs)

        return JsonResponse({
            'success': False,
            'error': 'POST requests only'
        }, status=405)

    return wrapper
