from django.db import models


class ContactSubmission(models.Model):
    name = models.TextField(blank=True)
    email = models.TextField(blank=True)
    message = models.TextField(blank=True)
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["received_at"]

    def __str__(self):
        return f"{self.name} <{self.email}>"
