import logging
from pathlib import Path

from django.conf import settings
from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .emails import send_password_reset_email, send_support_email
from .filters import ActivityLogFilter
from .models import ActivityLog
from .permissions import IsAdminRole
from .serializers import (
    UserSerializer, UserCreateSerializer, ChangePasswordSerializer,
    AdminResetPasswordSerializer, ForgotPasswordSerializer,
    TokenResetPasswordSerializer, SupportRequestSerializer, ActivityLogSerializer
)
from .utils import log_activity, generate_reset_token, reset_token_expiry

User = get_user_model()
logger = logging.getLogger('primegestor.core')

ACTIVITY_LOG_LIMIT = 100


class LoginSerializer(TokenObtainPairSerializer):
    default_error_messages = {
        'no_active_account': 'E-mail ou senha inválidos',
    }

    def validate(self, attrs):
        data = super().validate(attrs)
        # Ensure user is active
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['full_name'] = user.full_name
        token['role'] = user.role
        return token


class LoginView(TokenObtainPairView):
    serializer_class = LoginSerializer


class RefreshView(TokenRefreshView):
    pass


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get the authenticated user"""
    data = UserSerializer(request.user).data
    data['is_admin'] = request.user.is_admin
    return Response(data)


@api_view(['POST'])
@permission_classes([AllowAny])
def forgot_password(request):
    """Store a one-hour reset token and e-mail the reset link"""
    serializer = ForgotPasswordSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    email = serializer.validated_data['email']
    user = User.objects.filter(email__iexact=email).first()
    if not user:
        logger.warning(f"Password reset requested for unknown e-mail {email}")
        return Response(
            {'error': 'Por favor, entre em contato com o administrador para obter as credenciais de acesso. '
                      'No momento, você não está conectado ao sistema.'},
            status=status.HTTP_404_NOT_FOUND
        )

    user.reset_token = generate_reset_token()
    user.reset_token_expiry = reset_token_expiry()
    user.save(update_fields=['reset_token', 'reset_token_expiry'])

    try:
        send_password_reset_email(user, user.reset_token)
    except Exception as e:
        logger.error(f"Failed to send password reset e-mail to {user.email}: {str(e)}", exc_info=True)
        return Response(
            {'error': 'Falha ao enviar o e-mail de redefinição. Verifique a configuração do e-mail.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return Response({'message': 'Se uma conta com esse e-mail existir, um link de redefinição de senha foi enviado.'})


@api_view(['POST'])
@permission_classes([AllowAny])
def reset_password(request):
    """Set a new password using a valid, unexpired reset token"""
    serializer = TokenResetPasswordSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    token = serializer.validated_data['token']
    user = User.objects.filter(reset_token=token).first()
    if not user or not user.has_valid_reset_token(token):
        return Response({'error': 'Token de redefinição inválido ou expirado'}, status=status.HTTP_400_BAD_REQUEST)

    user.set_password(serializer.validated_data['new_password'])
    user.reset_token = None
    user.reset_token_expiry = None
    user.save()
    logger.info(f"Password reset completed for {user.email}")
    return Response({'message': 'A senha foi redefinida com sucesso'})


# User views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.order_by('-created_at')
        serializer = UserSerializer(users, many=True)
        return Response(serializer.data)
    else:
        serializer = UserCreateSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            logger.info(f"User {user.email} created by {request.user.email}")
            log_activity(request, 'CREATE', 'USER', user.id, user.full_name,
                         f"Usuário criado: {user.full_name} ({user.email})")
            return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        serializer = UserSerializer(user)
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserSerializer(user, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            log_activity(request, 'UPDATE', 'USER', user.id, user.full_name,
                         f"Usuário atualizado: {user.full_name}")
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if user.pk == request.user.pk:
            return Response({'error': 'Você não pode excluir o próprio usuário'}, status=status.HTTP_400_BAD_REQUEST)
        user_id, name, email = user.id, user.full_name, user.email
        user.delete()
        logger.info(f"User {email} deleted by {request.user.email}")
        log_activity(request, 'DELETE', 'USER', user_id, name, f"Usuário excluído: {name} ({email})")
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def change_password(request):
    """Change the authenticated user's password"""
    serializer = ChangePasswordSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = request.user
    if not user.check_password(serializer.validated_data['current_password']):
        logger.warning(f"Wrong current password supplied by {user.email}")
        return Response({'error': 'A senha atual está incorreta'}, status=status.HTTP_401_UNAUTHORIZED)

    user.set_password(serializer.validated_data['new_password'])
    user.save()
    return Response({'message': 'Senha alterada com sucesso'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_reset_password(request):
    """Administrator sets a new password for another user"""
    serializer = AdminResetPasswordSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.validated_data['user']
    user.set_password(serializer.validated_data['new_password'])
    user.save()
    logger.info(f"Password of {user.email} reset by {request.user.email}")
    log_activity(request, 'UPDATE', 'USER', user.id, user.full_name,
                 f"Senha redefinida para {user.full_name}")
    return Response({'message': 'Senha redefinida com sucesso'})


# ActivityLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def activity_log_list(request):
    """List the most recent activity logs with filtering"""
    queryset = ActivityLog.objects.select_related('user')
    filterset = ActivityLogFilter(request.query_params, queryset=queryset)
    if not filterset.is_valid():
        return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)

    queryset = filterset.qs.order_by('-created_at', '-id')[:ACTIVITY_LOG_LIMIT]
    serializer = ActivityLogSerializer(queryset, many=True)
    return Response(serializer.data)


@api_view(['POST'])
@permission_classes([AllowAny])
def support_request(request):
    """Forward a support request to the support mailbox"""
    serializer = SupportRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        send_support_email(**serializer.validated_data)
    except Exception as e:
        logger.error(f"Error sending support e-mail: {str(e)}", exc_info=True)
        return Response({'error': 'Failed to send support request'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'message': 'Support request sent successfully'})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def documentation(request):
    """Return the project README as documentation"""
    readme_path = Path(settings.BASE_DIR) / 'README.md'
    try:
        content = readme_path.read_text(encoding='utf-8')
    except OSError as e:
        logger.error(f"Error reading README: {str(e)}")
        return Response({'error': 'Falha ao carregar a documentação'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'content': content})
