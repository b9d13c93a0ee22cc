from django.urls import path
from .views import (
    daily_bon_list_create, daily_bon_detail,
    bon_pds_list_create, bon_pds_detail,
    msk_list_create, msk_detail,
)

urlpatterns = [
    # Daily Bon endpoints
    path('daily-bon/', daily_bon_list_create, name='daily-bon-list-create'),
    path('daily-bon/<int:pk>/', daily_bon_detail, name='daily-bon-detail'),

    # Bon PDS endpoints
    path('bon-pds/', bon_pds_list_create, name='bon-pds-list-create'),
    path('bon-pds/<int:pk>/', bon_pds_detail, name='bon-pds-detail'),

    # MSK endpoints
    path('msk/', msk_list_create, name='msk-list-create'),
    path('msk/<int:pk>/', msk_detail, name='msk-detail'),
]
