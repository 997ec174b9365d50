# Appointment e-mails. Sending is fire-and-forget: failures are logged only.
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

logger = logging.getLogger(__name__)

SUBJECTS = {
    'created': 'Appointment Request Received',
    'status_changed': 'Appointment Status Update',
    'cancelled': 'Appointment Cancelled',
    'missed': 'Missed Appointment',
    'confirmed': 'Appointment Confirmed',
    'completed': 'Appointment Completed',
}

MESSAGES = {
    'created': '<p>Your appointment for {pet_name} has been requested.</p>{details}'
               '<p>Please wait for confirmation from the clinic.</p>',
    'status_changed': '<p>Your appointment status has been updated to {status}.</p>{details}',
    'cancelled': '<p>Your appointment has been cancelled.</p>{details}',
    'missed': '<p>You missed your scheduled appointment.</p>{details}'
              '<p>Please contact us to reschedule your appointment.</p>',
    'confirmed': '<p>Your appointment has been confirmed by the clinic.</p>{details}'
                 '<p>Please arrive 10-15 minutes before your scheduled time.</p>'
                 '<p>Your appointment ID is {id}.</p>',
    'completed': '<p>Your appointment has been completed.</p>{details}'
                 '<p>The visit report is available in your pet\'s profile.</p>',
}


def render_email(event, data, clinic_name):
    details = (
        '<ul>'
        f"<li>Pet: {data.get('pet_name', '')}</li>"
        f"<li>Service: {data.get('service_name', '')}</li>"
        f"<li>Date: {data.get('date', '')}</li>"
        f"<li>Time: {data.get('time_label', data.get('time', ''))}</li>"
        + (f"<li>Notes: {data['notes']}</li>" if data.get('notes') else '')
        + '</ul>'
    )
    body = MESSAGES[event].format(
        pet_name=data.get('pet_name', 'your pet'),
        status=data.get('status', ''),
        id=data.get('id', ''),
        details=details,
    )
    subject = f'{SUBJECTS[event]} - {clinic_name}'
    html = (
        f"<div><h2>Hello {data.get('owner_name') or 'there'}!</h2>{body}"
        f'<p>Thank you for choosing {clinic_name}.</p><hr>'
        '<p>This is an automated message. Please do not reply to this email.</p></div>'
    )
    return subject, html


class EmailNotifier:
    def __init__(self, config):
        self.enabled = config.get('MAIL_ENABLED', False)
        self.server = config.get('MAIL_SERVER')
        self.port = config.get('MAIL_PORT', 587)
        self.username = config.get('MAIL_USERNAME')
        self.password = config.get('MAIL_PASSWORD')
        self.sender = config.get('MAIL_SENDER')
        self.timeout = config.get('MAIL_TIMEOUT', 10)
        self.clinic_name = config.get('CLINIC_NAME', 'Veterinary Clinic')

    def notify(self, event, appointment_data):
        if event not in SUBJECTS:
            logger.warning(f"Unknown notification event: {event}")
            return
        recipient = appointment_data.get('owner_email')
        if not recipient:
            logger.info(f"No e-mail on file for appointment {appointment_data.get('id')}, skipping '{event}'")
            return

        subject, html = render_email(event, appointment_data, self.clinic_name)
        if not self.enabled:
            logger.info(f"Mail disabled; '{event}' for appointment {appointment_data.get('id')} not sent to {recipient}")
            return
        try:
            self._send(recipient, subject, html)
            logger.info(f"Sent '{event}' e-mail for appointment {appointment_data.get('id')}")
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending '{event}' e-mail to {recipient}: {str(e)}")

    def _send(self, recipient, subject, html):
        message = MIMEMultipart('alternative')
        message['Subject'] = subject
        message['From'] = self.sender
        message['To'] = recipient
        message.attach(MIMEText(html, 'html'))
        with smtplib.SMTP(self.server, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            if self.username and self.password:
                smtp.login(self.username, self.password)
            smtp.send_message(message)
