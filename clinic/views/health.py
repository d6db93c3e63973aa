from django.db import DatabaseError, connections
from django.http import JsonResponse


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
    except DatabaseError as e:
        return JsonResponse({'success': False, 'db': False, 'error': str(e)}, status=503)
    return JsonResponse({'success': True, 'db': bool(row and row[0] == 1)})
