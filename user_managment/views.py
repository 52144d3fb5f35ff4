import logging

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.views import TokenObtainPairView

from .serializers import MyTokenObtainPairSerializer, UserDetailSerializer

logger = logging.getLogger(__name__)


class MyTokenObtainPairView(TokenObtainPairView):
    serializer_class = MyTokenObtainPairSerializer


class TokenCheckView(APIView):
    permission_classes = [AllowAny]  # No authentication required to check token

    def get(self, request, *args, **kwargs):
        token = request.headers.get("Authorization", "").split("Bearer ")[-1]

        if not token or token == "Bearer":
            return Response({"error": "Token missing"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            decoded_token = AccessToken(token)
            return Response({"message": "success", "user_id": decoded_token["user_id"]}, status=status.HTTP_200_OK)
        except TokenError:
            logger.info("Rejected invalid or expired access token")
            return Response({"error": "Token is invalid or expired"}, status=status.HTTP_401_UNAUTHORIZED)


class UserView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({
            'success': True,
            'data': UserDetailSerializer(request.user, context={'request': request}).data,
            'message': 'User profile retrieved.'
        }, status=status.HTTP_200_OK)
