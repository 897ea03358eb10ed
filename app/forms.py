from flask import current_app
from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField, BooleanField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, Email, EqualTo, Length, ValidationError


def validate_password_length(form, field):
    """Password length check driven by PASSWORD_MIN_LENGTH"""
    min_length = current_app.config.get('PASSWORD_MIN_LENGTH', 6)
    if len(field.data or '') < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters long")

class LoginForm(FlaskForm):
    username = StringField('Username or Email', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])
    remember_me = BooleanField('Remember Me')
    submit = SubmitField('Sign In')

class RegistrationForm(FlaskForm):
    username = StringField('Username', validators=[
        DataRequired(),
        Length(min=3, max=20, message='Username must be between 3 and 20 characters')
    ])
    email = StringField('Email', validators=[DataRequired(), Email()])
    password = PasswordField('Password', validators=[
        DataRequired(),
        validate_password_length
    ])
    password2 = PasswordField('Repeat Password', validators=[
        DataRequired(),
        EqualTo('password', message='Passwords must match')
    ])
    submit = SubmitField('Sign Up')

    def validate_username(self, username):
        from .services import user_service
        user = user_service.get_user_by_username(username.data)
        if user is not None:
            raise ValidationError('Please use a different username.')

    def validate_email(self, email):
        from .services import user_service
        user = user_service.get_user_by_email(email.data)
        if user is not None:
            raise ValidationError('Please use a different email address.')

class GramForm(FlaskForm):
    message = TextAreaField('Message', validators=[
        DataRequired(message="Message can't be blank"),
        Length(max=2000)
    ])
    submit = SubmitField('Post')

class CommentForm(FlaskForm):
    message = StringField('Comment')
    submit = SubmitField('Add Comment')
