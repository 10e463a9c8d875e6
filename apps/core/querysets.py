from .permissions import is_admin_user


def filter_owned(queryset, user):
    """Restrict a queryset of owned records to ``user`` unless they are an admin."""
    if is_admin_user(user):
        return queryset
    return queryset.filter(owner=user)
