from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from .models import Notification
from .serializers import NotificationSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_list(request):
    """List the user's notifications; ?filter=unread for unread only"""
    queryset = Notification.objects.filter(user=request.user)
    unread_count = queryset.filter(read=False).count()
    if request.query_params.get('filter') == 'unread':
        queryset = queryset.filter(read=False)
    serializer = NotificationSerializer(queryset, many=True)
    return Response({
        'results': serializer.data,
        'count': len(serializer.data),
        'unread_count': unread_count,
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def notification_mark_all_read(request):
    """Mark every notification of the user as read"""
    updated = Notification.objects.filter(user=request.user, read=False).update(read=True)
    return Response({'updated': updated, 'unread_count': 0})
