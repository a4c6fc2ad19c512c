from django.http import JsonResponse


def error_404_view(request, exception):
    return JsonResponse({"success": False, "message": "Not found"}, status=404)
