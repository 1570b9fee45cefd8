from django.core.management.base import BaseCommand
from reservations.models import Facility, Resort, Room


class Command(BaseCommand):
    help = 'Populate database with a sample resort, rooms and facilities'

    def handle(self, *args, **options):
        resort, _ = Resort.objects.get_or_create(
            name='Paradise Beach Resort',
            defaults={
                'location': 'Maldives',
                'description': 'Beachfront resort with overwater villas',
            },
        )

        rooms_data = [
            {
                'number': '101',
                'room_type': 'Garden Room',
                'price_cents': 15000,  # $150
                'capacity': 2,
                'description': 'Quiet room facing the tropical garden'
            },
            {
                'number': '102',
                'room_type': 'Garden Room',
                'price_cents': 16000,  # $160
                'capacity': 2,
                'description': 'Garden room with private terrace'
            },
            {
                'number': '201',
                'room_type': 'Ocean View Suite',
                'price_cents': 30000,  # $300
                'capacity': 3,
                'description': 'Suite with balcony over the lagoon'
            },
            {
                'number': '301',
                'room_type': 'Family Villa',
                'price_cents': 45000,  # $450
                'capacity': 5,
                'description': 'Two-bedroom villa steps from the beach'
            },
            {
                'number': '401',
                'room_type': 'Overwater Villa',
                'price_cents': 80000,  # $800
                'capacity': 2,
                'description': 'Villa on stilts with direct lagoon access'
            },
        ]

        for room_data in rooms_data:
            room, created = Room.objects.get_or_create(
                resort=resort,
                number=room_data['number'],
                defaults=room_data
            )

            if created:
                self.stdout.write(f'Created room: {room.number} - {room.room_type}')
            else:
                self.stdout.write(f'Room {room.number} already exists')

        for name, description in [
            ('Spa', 'Massages and treatments by appointment'),
            ('Tennis Court', 'Floodlit hard court'),
            ('Dive Center', 'Guided dives and equipment rental'),
        ]:
            facility, created = Facility.objects.get_or_create(
                resort=resort,
                name=name,
                defaults={'description': description},
            )
            if created:
                self.stdout.write(f'Created facility: {facility.name}')

        self.stdout.write(
            self.style.SUCCESS('Successfully populated database with sample data')
        )
