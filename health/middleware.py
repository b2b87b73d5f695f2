from django.utils.functional import SimpleLazyObject


def _hospital_for(request):
    user = getattr(request, 'user', None)
    if not (user and user.is_authenticated and getattr(user, 'role', None) == 'hospital'):
        return None
    return user.hospital


class HospitalContextMiddleware:
    """Expose the signed-in hospital account's Hospital as ``request.hospital``."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.hospital = SimpleLazyObject(lambda: _hospital_for(request))
        return self.get_response(request)
