from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from Accounts.permissions import IsAdminRole

from .serializers import ReportSerializer
from .services import build_report


class AdminReportView(APIView):
    permission_classes = [IsAdminRole]

    def get(self, request):
        serializer = ReportSerializer(build_report(request.user))

        return Response(
            {"status": "success", "data": serializer.data},
            status=status.HTTP_200_OK
        )
