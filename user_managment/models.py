from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


class UserManager(BaseUserManager):
    def create_user(self, email, first_name, password=None, **extra_fields):
        """
        Creates and returns a regular user with the given email, first name, and password.
        """
        if not email:
            raise ValueError('The email field must be set')
        if not first_name:
            raise ValueError('The First Name field must be set')

        user = self.model(
            email=self.normalize_email(email),
            first_name=first_name,
            **extra_fields
        )
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, first_name, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if not extra_fields.get('is_staff'):
            raise ValueError('Superuser must have is_staff=True.')
        if not extra_fields.get('is_superuser'):
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, first_name, password=password, **extra_fields)


class Role(models.Model):
    STUDENT = 'student'
    TEACHER = 'teacher'

    name = models.CharField(max_length=100, unique=True)

    def clean(self):
        super().clean()
        if self.name:
            normalized = self.name.strip().lower()
            # Canonicalize known aliases
            if normalized in ('instructor',):
                normalized = self.TEACHER
            if normalized in ('students',):
                normalized = self.STUDENT

            qs = Role.objects.filter(name__iexact=normalized)
            if self.pk:
                qs = qs.exclude(pk=self.pk)
            if qs.exists():
                raise ValidationError({'name': 'Role with this name already exists.'})

            self.name = normalized

    def __str__(self):
        return self.name


class User(AbstractUser):
    first_name = models.CharField(max_length=255, null=False)
    middle_name = models.CharField(max_length=255, null=True, blank=True)
    last_name = models.CharField(max_length=255, null=True, blank=True)
    email = models.EmailField(max_length=254, unique=True)
    role = models.ForeignKey(Role, on_delete=models.SET_NULL, null=True, blank=True, related_name='users')
    created = models.DateTimeField(default=timezone.now)
    # Instructor-specific fields
    title = models.CharField(max_length=200, blank=True, null=True, help_text="Professional title (e.g., 'Senior Software Engineer')")
    bio = models.TextField(max_length=500, blank=True, null=True, help_text="Instructor biography")

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name']
    objects = UserManager()

    class Meta:
        verbose_name = 'user'
        verbose_name_plural = 'users'

    def get_full_name(self):
        parts = [self.first_name]
        if self.middle_name:
            parts.append(self.middle_name)
        if self.last_name:
            parts.append(self.last_name)
        return ' '.join(parts)

    @property
    def is_instructor(self):
        return bool(self.is_staff or (self.role and self.role.name.lower() == Role.TEACHER))

    def save(self, *args, **kwargs):
        # Generate a unique username if not set
        if not self.username:
            base_username = self.email.split('@')[0]
            username = base_username
            counter = 1
            while User.objects.filter(username=username).exists():
                username = f"{base_username}{counter}"
                counter += 1
            self.username = username
        super().save(*args, **kwargs)

    def __str__(self):
        return f'{self.first_name}'
