"""HTML templates for transactional emails."""

from jinja2 import BaseLoader, Environment, TemplateNotFound, select_autoescape

_BRAND = "Coachlink"

_TEMPLATES = {
    "invitation": """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background-color: #29b643; padding: 20px; text-align: center;">
    <h1 style="color: white; margin: 0;">{{ brand }}</h1>
    <p style="color: white; margin: 5px 0 0 0;">Running coaching platform</p>
  </div>
  <div style="padding: 30px 20px;">
    <h2 style="color: #333;">You've been invited to join a coaching program!</h2>
    <p><strong>{{ coach_name }}</strong> has invited you to join their running coaching program on {{ brand }}.</p>
    {% if message %}
    <div style="background-color: #f8f9fa; padding: 15px; border-left: 4px solid #29b643; margin: 20px 0;">
      <p style="margin: 0; font-style: italic;">"{{ message }}"</p>
    </div>
    {% endif %}
    <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0;">
      <h3 style="margin-top: 0;">About your coach</h3>
      <p><strong>Name:</strong> {{ coach_name }}</p>
      <p><strong>Email:</strong> {{ coach_email }}</p>
      {% if qualifications %}
      <p><strong>Qualifications:</strong> {{ qualifications | join(", ") }}</p>
      {% endif %}
    </div>
    <div style="text-align: center; margin: 30px 0;">
      <a href="{{ invitation_url }}"
         style="background-color: #29b643; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; font-weight: bold; display: inline-block;">
        Accept Invitation
      </a>
    </div>
    <p style="font-size: 14px; color: #666;">This invitation expires on {{ expires_on }}.</p>
    <p style="font-size: 14px; color: #666;">If you didn't expect this invitation, you can safely ignore this email.</p>
  </div>
  <div style="background-color: #f8f9fa; padding: 20px; text-align: center; font-size: 12px; color: #666;">
    <p>If you have questions, reply to this email or contact {{ coach_email }}</p>
  </div>
</div>
""",
    "acceptance_notice": """
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background-color: #29b643; padding: 20px; text-align: center;">
    <h1 style="color: white; margin: 0;">{{ brand }}</h1>
  </div>
  <div style="padding: 30px 20px;">
    <h2 style="color: #333;">Great news, {{ coach_name }}!</h2>
    <p style="font-size: 16px; line-height: 1.6;">
      <strong>{{ athlete_name }}</strong> has accepted your coaching invitation and is now part of your coaching program.
    </p>
    <div style="background-color: #f0fdf4; padding: 20px; border-radius: 8px; border-left: 4px solid #29b643; margin: 20px 0;">
      <h3 style="margin-top: 0; color: #166534;">New athlete details</h3>
      <p style="margin: 8px 0;"><strong>Name:</strong> {{ athlete_name }}</p>
      <p style="margin: 8px 0;"><strong>Email:</strong> {{ athlete_email }}</p>
      {% if experience_level %}
      <p style="margin: 8px 0;"><strong>Experience level:</strong> {{ experience_level }}</p>
      {% endif %}
      {% if goal_race %}
      <p style="margin: 8px 0;"><strong>Goal race:</strong> {{ goal_race }}</p>
      {% endif %}
      <p style="margin: 8px 0;"><strong>Accepted:</strong> {{ accepted_at }}</p>
    </div>
    <div style="text-align: center; margin: 30px 0;">
      <a href="{{ athlete_profile_url }}"
         style="background-color: #29b643; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; font-weight: bold; display: inline-block;">
        View Athlete Profile
      </a>
    </div>
  </div>
</div>
""",
}


class TemplateLoader(BaseLoader):
    """Loads the email templates defined in this module."""

    def get_source(self, environment, template):
        if template not in _TEMPLATES:
            raise TemplateNotFound(template)
        return _TEMPLATES[template], None, lambda: True


_env = Environment(loader=TemplateLoader(), autoescape=select_autoescape(default=True))


def render(template: str, **context) -> str:
    """Render a named email template."""
    return _env.get_template(template).render(brand=_BRAND, **context)
