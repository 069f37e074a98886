from django.urls import path
from .views import (
    screen_list, screen_mount, screen_session,
    screen_rows, screen_row_detail, screen_filter, screen_modal,
    query_log, query_log_toggle, query_log_copy,
)

urlpatterns = [
    # Screen endpoints
    path('screens/', screen_list, name='screen-list'),
    path('screens/<str:screen>/', screen_mount, name='screen-mount'),
    path('screens/<str:screen>/<str:session_id>/', screen_session, name='screen-session'),
    path('screens/<str:screen>/<str:session_id>/rows/', screen_rows, name='screen-rows'),
    path('screens/<str:screen>/<str:session_id>/rows/<str:pk>/', screen_row_detail, name='screen-row-detail'),
    path('screens/<str:screen>/<str:session_id>/filter/', screen_filter, name='screen-filter'),
    path('screens/<str:screen>/<str:session_id>/modal/', screen_modal, name='screen-modal'),

    # Query log endpoints
    path('screens/<str:screen>/<str:session_id>/query-log/', query_log, name='screen-query-log'),
    path('screens/<str:screen>/<str:session_id>/query-log/toggle/', query_log_toggle, name='screen-query-log-toggle'),
    path(
        'screens/<str:screen>/<str:session_id>/query-log/<str:entry_id>/copy/',
        query_log_copy,
        name='screen-query-log-copy',
    ),
]
