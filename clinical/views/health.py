from django.db import DatabaseError, connections
from django.http import JsonResponse

from clinical.models import Room

def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        free = Room.objects.filter(is_occupied=False).count()
        return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1), 'freeRooms': free})
    except DatabaseError as e:
        return JsonResponse({'ok': False, 'error': str(e)}, status=500)
