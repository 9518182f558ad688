from functools import wraps

from rest_framework.exceptions import PermissionDenied, NotAuthenticated


def require_role(request, required_role):
    """
    Raise NotAuthenticated (401) when there is no user on the request and
    PermissionDenied (403) when the user has a different role.
    """
    user = request.user

    if not user or not user.is_authenticated:
        raise NotAuthenticated("Authentication required")

    if user.user_type != required_role:
        raise PermissionDenied(f"Access denied. This endpoint is for {required_role.replace('_', ' ')} accounts only.")

    return user


def role_required(required_role):
    """
    Role-based decorator for DRF function views.
    Must sit below @api_view so the DRF request (and its JWT user) is passed in.
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            require_role(request, required_role)
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator
