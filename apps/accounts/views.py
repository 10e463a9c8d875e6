from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    BusinessSettingsSerializer,
    PublicPageSerializer,
)
from .services import (
    register_user,
    issue_tokens,
    authenticate_user,
    revoke_refresh_token,
    get_business_settings,
    update_business_settings,
    get_public_page,
    upsert_public_page,
    AccountsServiceError,
)


# Response serializers for API documentation
class TokenPairSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class SessionResponseSerializer(serializers.Serializer):
    user = UserSerializer()
    tokens = TokenPairSerializer()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(help_text="Refresh token to blacklist")


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _session_response(user, status_code=status.HTTP_200_OK):
    return Response({
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    }, status=status_code)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={201: SessionResponseSerializer, 400: ErrorResponseSerializer},
    description="Create an account with default business settings and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except AccountsServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    return _session_response(user, status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: SessionResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Exchange email and password for JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(**serializer.validated_data)
    except AccountsServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    return _session_response(user)


@extend_schema(
    request=LogoutRequestSerializer,
    responses={204: None, 400: ErrorResponseSerializer},
    description="Blacklist the given refresh token.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    serializer = LogoutRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        revoke_refresh_token(token=serializer.validated_data['refresh'])
    except AccountsServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(responses={200: UserSerializer}, tags=['auth'])
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    return Response(UserSerializer(request.user).data)


@extend_schema(
    methods=['GET'],
    responses={200: BusinessSettingsSerializer},
    description="Business settings of the current user (created with defaults on first access).",
    tags=['settings'],
)
@extend_schema(
    methods=['PATCH'],
    request=BusinessSettingsSerializer,
    responses={200: BusinessSettingsSerializer},
    description="Update business name, contact details, currency and booking defaults.",
    tags=['settings'],
)
@api_view(['GET', 'PATCH'])
@permission_classes([IsAuthenticated])
def business_settings(request):
    instance = get_business_settings(user=request.user)

    if request.method == 'GET':
        return Response(BusinessSettingsSerializer(instance).data)

    serializer = BusinessSettingsSerializer(instance, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    instance = update_business_settings(user=request.user, **serializer.validated_data)
    return Response(BusinessSettingsSerializer(instance).data)


@extend_schema(
    methods=['GET'],
    responses={200: PublicPageSerializer, 404: ErrorResponseSerializer},
    description="The current user's public availability page.",
    tags=['settings'],
)
@extend_schema(
    methods=['PUT'],
    request=PublicPageSerializer,
    responses={200: PublicPageSerializer, 400: ErrorResponseSerializer},
    description="Create or update the current user's public availability page.",
    tags=['settings'],
)
@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def public_page(request):
    try:
        if request.method == 'GET':
            page = get_public_page(user=request.user)
        else:
            serializer = PublicPageSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            page = upsert_public_page(user=request.user, **serializer.validated_data)
    except AccountsServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    return Response(PublicPageSerializer(page).data)
