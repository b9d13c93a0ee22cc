from django.urls import path
from .views import (
    nr_list_create, nr_detail, tsn_list_create, tsn_detail,
    tsp_list_create, tsp_detail, sob_list_create, sob_detail,
)

urlpatterns = [
    path('nr/', nr_list_create, name='nr-list-create'),
    path('nr/<int:pk>/', nr_detail, name='nr-detail'),
    path('tsn/', tsn_list_create, name='tsn-list-create'),
    path('tsn/<int:pk>/', tsn_detail, name='tsn-detail'),
    path('tsp/', tsp_list_create, name='tsp-list-create'),
    path('tsp/<int:pk>/', tsp_detail, name='tsp-detail'),
    path('sob/', sob_list_create, name='sob-list-create'),
    path('sob/<int:pk>/', sob_detail, name='sob-detail'),
]
