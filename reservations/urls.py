from rest_framework.routers import DefaultRouter
from reservations.views import BookingViewSet, FacilityBookingViewSet, FacilityViewSet, RoomViewSet

router = DefaultRouter()
router.register(r'rooms', RoomViewSet)
router.register(r'facilities', FacilityViewSet)
router.register(r'bookings', BookingViewSet)
router.register(r'facility-bookings', FacilityBookingViewSet)

urlpatterns = router.urls
