from django.core.management.base import BaseCommand, CommandError
from delivery import emails
from delivery.models import DeliveryPartner
from delivery.services import TransitionError, reissue_credentials

class Command(BaseCommand):
    help = "Issue a new password and verification link to an approved delivery partner and email them"

    def add_arguments(self, parser):
        parser.add_argument("partner_id", help="Partner ID such as DP007")

    def handle(self, *args, **opts):
        partner = DeliveryPartner.objects.filter(partner_id=opts["partner_id"].upper()).first()
        if partner is None:
            raise CommandError(f"No delivery partner with ID {opts['partner_id']}")
        try:
            password = reissue_credentials(partner)
        except TransitionError as e:
            raise CommandError(str(e))

        if emails.send_partner_approved_email(partner, password):
            self.stdout.write(self.style.SUCCESS(f"Credentials sent to {partner.email}"))
        else:
            self.stdout.write(self.style.WARNING(f"Credentials reset for {partner.partner_id} but the email could not be sent"))
