from asgiref.sync import async_to_sync
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, renderer_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer, StaticHTMLRenderer
from rest_framework.response import Response
from stockroom.core.context import SessionContext
from .collaborator import OrmCollaborator
from .controller import ScreenController
from .registry import sessions
from .schema import SCREENS, get_screen
from .serializers import DeleteRequestSerializer, FilterRequestSerializer, ModalActionSerializer


def _not_found(message):
    return Response({'error': message}, status=status.HTTP_404_NOT_FOUND)


def _get_controller(request, screen, session_id):
    controller = sessions.get(session_id, request.user.pk)
    if controller is None or controller.schema.key != screen:
        return None
    return controller


def _drain(controller):
    return [toast.as_dict() for toast in controller.toasts.drain()]


def _payload(controller, session_id, code=status.HTTP_200_OK):
    data = controller.snapshot()
    data['session_id'] = session_id
    data['toasts'] = _drain(controller)
    return Response(data, status=code)


def _form_data(request):
    data = request.data
    return data.dict() if hasattr(data, 'dict') else dict(data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def screen_list(request):
    """Screens available to mount"""
    return Response([schema.as_dict() for schema in SCREENS.values()])


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def screen_mount(request, screen):
    """Mount a screen and load its rows"""
    schema = get_screen(screen)
    if schema is None:
        return _not_found(f"Unknown screen '{screen}'")
    controller = ScreenController(schema, OrmCollaborator(), context=SessionContext.from_request(request))
    async_to_sync(controller.mount)()
    session_id = sessions.open(controller, request.user.pk)
    return _payload(controller, session_id, code=status.HTTP_201_CREATED)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def screen_session(request, screen, session_id):
    """Snapshot of a mounted screen, or unmount it"""
    controller = _get_controller(request, screen, session_id)
    if controller is None:
        return _not_found("Screen session not found")
    if request.method == 'DELETE':
        sessions.close(session_id, request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
    return _payload(controller, session_id)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def screen_rows(request, screen, session_id):
    """Submit the add form"""
    controller = _get_controller(request, screen, session_id)
    if controller is None:
        return _not_found("Screen session not found")
    async_to_sync(controller.add)(_form_data(request))
    return _payload(controller, session_id)


@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def screen_row_detail(request, screen, session_id, pk):
    """Submit the edit form for one row, or delete it (requires confirm=true)"""
    controller = _get_controller(request, screen, session_id)
    if controller is None:
        return _not_found("Screen session not found")
    if request.method == 'PATCH':
        async_to_sync(controller.edit)(pk, _form_data(request))
        return _payload(controller, session_id)

    serializer = DeleteRequestSerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    if serializer.validated_data['confirm']:
        async_to_sync(controller.delete)(pk, confirmed=True)
    elif not controller.request_delete(pk):
        return _not_found("Row not found")
    return _payload(controller, session_id)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def screen_filter(request, screen, session_id):
    """Apply a named filter or the free-text filter box"""
    controller = _get_controller(request, screen, session_id)
    if controller is None:
        return _not_found("Screen session not found")
    serializer = FilterRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    async_to_sync(controller.apply_filter)(
        name=data.get('name'),
        params=data.get('params'),
        text=data.get('text'),
    )
    return _payload(controller, session_id)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def screen_modal(request, screen, session_id):
    """Open the add or edit form, or close it"""
    controller = _get_controller(request, screen, session_id)
    if controller is None:
        return _not_found("Screen session not found")
    serializer = ModalActionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    action = serializer.validated_data['action']
    if action == 'open_add':
        controller.open_add()
    elif action == 'open_edit':
        if not controller.open_edit(serializer.validated_data['pk']):
            return _not_found("Row not found")
    else:
        controller.close_modal()
    return _payload(controller, session_id)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
@renderer_classes([JSONRenderer, StaticHTMLRenderer])
def query_log(request, screen, session_id):
    """The screen's SQL query panel (?format=html for markup); DELETE clears it"""
    controller = _get_controller(request, screen, session_id)
    if controller is None:
        if request.accepted_renderer.format == 'html':
            return Response("<p>Screen session not found</p>", status=status.HTTP_404_NOT_FOUND)
        return _not_found("Screen session not found")
    if request.method == 'DELETE':
        controller.query_log.clear()
    if request.accepted_renderer.format == 'html':
        return Response(controller.viewer.render())
    return Response(controller.viewer.as_dict())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def query_log_toggle(request, screen, session_id):
    controller = _get_controller(request, screen, session_id)
    if controller is None:
        return _not_found("Screen session not found")
    controller.viewer.toggle()
    return Response(controller.viewer.as_dict())


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def query_log_copy(request, screen, session_id, entry_id):
    """Copy one entry's query text"""
    controller = _get_controller(request, screen, session_id)
    if controller is None:
        return _not_found("Screen session not found")
    if controller.viewer.get_entry(entry_id) is None:
        return _not_found("Query log entry not found")
    text = controller.viewer.copy(entry_id)
    return Response({'text': text, 'toasts': _drain(controller)})
