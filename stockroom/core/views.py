from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from django.contrib.auth import get_user_model
from .context import SessionContext
from .models import ActivityLog
from .serializers import (
    UserSerializer, ActivityLogSerializer, ActivityLogQuerySerializer,
    AccountSettingsSerializer, CompanySettingsSerializer, PasswordChangeSerializer,
    NotificationSettingsSerializer, AppearanceSettingsSerializer,
)
from .settings_service import UserSettingsService

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        # Ensure user is active
        if not self.user.is_active:
            from rest_framework_simplejwt.exceptions import AuthenticationFailed
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get the current user"""
    return Response(UserSerializer(request.user).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def activity_log_list(request):
    """List activity logs with optional table/action filters"""
    params = ActivityLogQuerySerializer(data=request.query_params)
    if not params.is_valid():
        return Response(params.errors, status=status.HTTP_400_BAD_REQUEST)

    queryset = ActivityLog.objects.select_related('user').all()
    table_name = params.validated_data.get('table_name')
    action_type = params.validated_data.get('action_type')
    if table_name:
        queryset = queryset.filter(table_name=table_name)
    if action_type:
        queryset = queryset.filter(action_type=action_type)
    serializer = ActivityLogSerializer(queryset[:params.validated_data['limit']], many=True)
    return Response(serializer.data)


def _settings_response(toast):
    code = status.HTTP_400_BAD_REQUEST if toast.is_destructive else status.HTTP_200_OK
    return Response({'toast': toast.as_dict()}, status=code)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def settings_detail(request):
    """All settings of the acting user"""
    service = UserSettingsService(SessionContext.from_request(request))
    return Response(service.load())


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def settings_account(request):
    serializer = AccountSettingsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    service = UserSettingsService(SessionContext.from_request(request))
    return _settings_response(service.save_account_settings(**serializer.validated_data))


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def settings_company(request):
    serializer = CompanySettingsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    service = UserSettingsService(SessionContext.from_request(request))
    return _settings_response(service.save_company_settings(
        company_name=data['companyName'],
        website=data['website'],
        address=data['address'],
        phone=data['phone'],
    ))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def settings_password(request):
    serializer = PasswordChangeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    service = UserSettingsService(SessionContext.from_request(request))
    return _settings_response(service.change_password(
        serializer.validated_data['current_password'],
        serializer.validated_data['new_password'],
    ))


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def settings_notifications(request):
    serializer = NotificationSettingsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    service = UserSettingsService(SessionContext.from_request(request))
    return _settings_response(service.save_notification_settings(serializer.validated_data))


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def settings_appearance(request):
    serializer = AppearanceSettingsSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    service = UserSettingsService(SessionContext.from_request(request))
    return _settings_response(service.save_appearance_settings(**serializer.validated_data))
