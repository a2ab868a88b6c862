from django.apps import apps
from django.http import HttpResponseServerError
from django.shortcuts import render, redirect
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods


def get_pipeline():
    return apps.get_app_config('contacts').pipeline


@csrf_exempt
@require_http_methods(["GET", "POST"])
def contact(request):
    if request.method == "POST":
        outcome = get_pipeline().handle(request.POST)
        if outcome.is_redirect:
            return redirect(outcome.location)
        return HttpResponseServerError("Error interno del servidor.")

    return render(request, "contacts/contacto.html")
