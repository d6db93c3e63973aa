import bleach
from rest_framework import serializers


class PaginationQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, default=1,
                                    error_messages={'min_value': 'Page must be a positive integer'})
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10,
                                     error_messages={'min_value': 'Limit must be between 1 and 100',
                                                     'max_value': 'Limit must be between 1 and 100'})


def clean_text(v):
    return bleach.clean((v or '').strip(), strip=True)


def full_items(serializer_class, items):
    """Validate list entries without the parent's ``partial`` flag, so
    required fields and defaults apply to every entry of a replaced list."""
    s = serializer_class(data=list(items), many=True)
    s.is_valid(raise_exception=True)
    return s.validated_data
